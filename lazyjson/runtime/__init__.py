"""Runtime orchestration: session state, navigation, config and the event loop."""
