from strava_tools.main import main

main()
