from apidoc_examples.cli import main

raise SystemExit(main())
