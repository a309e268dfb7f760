from recordkeeper.cli import main

raise SystemExit(main())
