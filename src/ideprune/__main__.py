from ideprune.cli import main

raise SystemExit(main())
