from steamcmd_wrapper.main import main

raise SystemExit(main())
