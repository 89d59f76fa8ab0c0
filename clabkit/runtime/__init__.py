"""Runtime settings and registry, with pure Docker and containerd helpers."""