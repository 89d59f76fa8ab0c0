"""Map merging, image naming, file and MAC address helpers."""