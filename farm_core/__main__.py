from farm_core.console import main

main()
