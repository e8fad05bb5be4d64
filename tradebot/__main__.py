from tradebot.main import main

raise SystemExit(main())
