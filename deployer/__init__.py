"""Blue-green deployment orchestration across platform foundations."""
