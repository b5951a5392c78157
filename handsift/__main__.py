from handsift.sift import main


main()
