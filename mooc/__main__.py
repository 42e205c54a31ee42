from mooc.cli import main

main()
