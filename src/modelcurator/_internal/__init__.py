"""Internal plumbing: exceptions, logging and configuration."""
