"""Feature building: raw observations -> FeatureSnapshot (see ``builder``)."""
