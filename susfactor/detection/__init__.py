"""Statistical engine: accumulation, baseline, anomaly scoring, suspicion."""
