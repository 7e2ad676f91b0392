from bookpress.main import main

main()
