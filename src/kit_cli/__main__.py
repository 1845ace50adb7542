from kit_cli.main import main

main()
