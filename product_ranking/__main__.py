from product_ranking.cli import main

raise SystemExit(main())
