from layer_report.main import main

raise SystemExit(main())
