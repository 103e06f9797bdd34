from cmake_source_builder.ci.main import main

raise SystemExit(main())
