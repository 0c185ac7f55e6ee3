from bstcheck.cli.sweep_cli import main

raise SystemExit(main())
