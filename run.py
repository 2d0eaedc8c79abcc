from latency_topology.api.app import main

if __name__ == '__main__':
    main()
