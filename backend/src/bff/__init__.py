"""Backend-for-frontend gateway: Lambda handlers and CDK stacks."""
