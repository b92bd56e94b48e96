from ffbun_cli.cli import main

main()
