"""fleetroll: rolling deployments coordinated with a load balancer."""
