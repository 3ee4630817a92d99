"""SiteDeploy: publish the static blog to S3 and CloudFront.

The package wraps a small, strictly sequential deploy workflow around
third-party tooling. The static-site build, the bucket sync and the CDN
invalidation are all performed by external tools; SiteDeploy only validates
prerequisites, asks for confirmation and sequences the calls.

Architecture:
- config: immutable deploy target and settings, optional deploy.yaml overrides.
- errors: one exception per workflow step.
- shell / tooling: subprocess execution and executable discovery.
- invalidation: CloudFront invalidation requests.
- orchestrator: the Deployer state machine.
- cli: Click entry point.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
