from studyhours.cli import main

main()
