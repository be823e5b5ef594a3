"""Engine — runner, classifier, recovery, planner and report."""
