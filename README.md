# sysprobe

`sysprobe` reports information about a Linux machine and its processes. It
reads them from a procfs tree. For the host it gives the hostname,
architecture, kernel release, distribution, boot time, network addresses,
machine id and whether the host runs in a container. It also gives memory
usage, CPU time, virtual-memory counters and network counters. For a single
process it gives the name, arguments, working directory, environment, user
and group ids, memory, CPU time, open file descriptors, capabilities, seccomp
state and network counters.

It also has parsers for two macOS data formats: `SystemVersion.plist` and
the `KERN_PROCARGS2` argument block.

## Installation

```
pip install .
```

To install with the test dependencies and run the tests:

```
pip install ".[test]"
pytest
```

## Usage

### Host information on Linux

```python
from sysprobe.linux.host import LinuxSystem

system = LinuxSystem()            # reads /proc
host = system.host()

info = host.info()
print(info.hostname, info.architecture, info.kernel_version)
print(info.os.name, info.os.version, info.os.family)
print(info.boot_time, info.containerized, info.ips, info.macs)

mem = host.memory()               # HostMemoryInfo, in bytes
print(mem.total, mem.available, mem.metrics["Slab"])

print(host.cpu_time())            # CPUTimes of timedelta values
print(host.vmstat()["slabs_scanned"])
counters = host.network_counters()
print(counters.snmp["Ip"], counters.netstat["TcpExt"])
```

`LinuxSystem(host_fs)` reads `<host_fs>/proc` instead of `/proc`. This is
useful for a host filesystem mounted inside a container, or for a saved copy.

`host()` tries every reading separately. A reading that does not exist on the
system, such as a missing machine-id file, is left unset. If any other reading
fails, `host()` raises an `ExceptionGroup` of all the failures after it has
tried everything. The group's `host` attribute holds the partly filled host.

### Processes

```python
from sysprobe.linux.host import LinuxSystem

system = LinuxSystem()
me = system.current()

print(me.info().name, me.info().args, me.info().start_time)
print(me.user())
print(me.capabilities().effective)
print(me.seccomp().mode, me.seccomp().no_new_privs)
print(me.open_handle_count(), me.environment().get("HOME"))
print(me.parent().pid)

for proc in system.processes():   # ascending pid
    print(proc.pid)
```

`system.process(pid)` raises `ProcessLookupError` if there is no such process.

### Parsing data directly

The parsers take file contents as `str` or `bytes`, so they also work on saved
copies:

```python
from sysprobe.linux.memory import parse_meminfo
from sysprobe.linux.vmstat import parse_vmstat
from sysprobe.linux.procnet import parse_net_file
from sysprobe.linux.capabilities import read_capabilities
from sysprobe.linux.container import is_containerized_cgroup
from sysprobe.linux.osrelease import get_os_info, parse_os_release

is_containerized_cgroup("1:name=systemd:/docker/abc\n")   # True
get_os_info("/path/to/rootfs")                            # OSInfo(...)
parse_os_release('ID=ubuntu\nVERSION="22.04 LTS (Jammy Jellyfish)"\n')
```

For macOS, `sysprobe.darwin.parse_os_info` turns `SystemVersion.plist` bytes
into an `OSInfo`, and `sysprobe.darwin.operating_system()` reads the plist
from its standard location. `sysprobe.darwin.parse_procargs` decodes a
`KERN_PROCARGS2` buffer into a `ProcArgs` with `exe`, `args` and `env`.

### Registry

Several parts of a program can share one provider. Register it once with
`sysprobe.registry.register`, and get it back with `get_host_provider()` and
`get_process_provider()`. An object counts as a host provider if it has
`host()`. It counts as a process provider if it has `processes()`,
`process(pid)` and `current()`. A `LinuxSystem` is both. Registering a second
provider of the same kind raises `ProviderAlreadyRegisteredError`. `reset()`
forgets every registered provider.

## What it does not do

- Only Linux has live host and process providers. For macOS the package only
  parses data that you supply or that sits in a file. It does not query the
  kernel for memory, CPU or process details.
- There is no support for AIX.
- There is no command-line tool. The package is a library.