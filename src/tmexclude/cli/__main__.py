from tmexclude.cli.main import main

main()
