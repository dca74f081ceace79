"""Volume-threshold speech detection: classification, trackers and the session object."""
