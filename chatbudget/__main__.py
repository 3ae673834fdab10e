from chatbudget.main import main

main()
