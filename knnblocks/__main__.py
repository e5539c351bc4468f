from knnblocks.cli import main

raise SystemExit(main())
