from tokensurvey.cli import main

main()
