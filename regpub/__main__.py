from regpub.cli.app import main

main()
