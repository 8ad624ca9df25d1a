"""Services for auditing, sidebars, fence fixing and scaffolding."""
