from chronology.cli.main import main

main()
