from grading_runner.orchestrator.main import main


if __name__ == "__main__":
    main()
