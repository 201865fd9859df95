from next_scaffold.runner import main

main()
