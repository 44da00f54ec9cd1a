"""Scene renderer: visual state, camera rig, picking and the HTML viewer."""
