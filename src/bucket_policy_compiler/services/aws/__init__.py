"""AWS S3 provisioning collaborator."""
