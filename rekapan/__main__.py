from rekapan.cli import main

main()
