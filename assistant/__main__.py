from .llm.main import main

raise SystemExit(main())
