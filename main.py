def main():
    """Print quick-start command references for the workflow."""
    print("incident explorer")
    print("Key commands:")
    print("  python -m incident_explorer.flows.dataset_flow <dataset>  # build artifacts")
    print("  python explore.py <dataset> --entity <name>                # filter reports")
    print("  uvicorn app.api:app                                       # serve the data model")
    print("  python print_flow.py                                      # show the flow DAG")


if __name__ == "__main__":
    main()
