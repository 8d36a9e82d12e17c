"""ProjectHub: workspace, project and task management backend."""
