from batch_sender.main import main

raise SystemExit(main())
