from prefect_deploy.cli import main

main()
