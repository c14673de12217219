from video_resolver.main import main

main()
