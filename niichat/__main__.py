from niichat.main import main

main()
