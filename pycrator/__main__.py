from pycrator.cli import main

raise SystemExit(main())
