from phonesim.cli import main

main()
