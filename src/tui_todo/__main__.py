from tui_todo.cli import main

main()
