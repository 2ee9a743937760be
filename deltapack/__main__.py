from deltapack.cli.app import main

main()
