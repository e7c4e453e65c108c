"""Linux host and process information read from a procfs tree."""