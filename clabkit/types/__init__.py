"""Lab topology, node definition, node, link and container types."""