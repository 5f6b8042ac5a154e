from cmdshell.main import main

main()
