"""GitLab REST access: the tracker gateway and the values it returns."""
