"""Domain layer: model, ports and the staged import pipeline."""
