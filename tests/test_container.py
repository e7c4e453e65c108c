import pytest

from sysprobe.linux.container import is_containerized, is_containerized_cgroup

NON_CONTAINERIZED = """11:freezer:/
10:pids:/init.scope
9:memory:/init.scope
8:cpuset:/
7:perf_event:/
6:hugetlb:/
5:blkio:/init.scope
4:net_cls,net_prio:/
3:devices:/init.scope
2:cpu,cpuacct:/init.scope
1:name=systemd:/init.scope
"""

_DOCKER_ID = "81438f4655cd771c425607dcf7654f4dc03c073c0123edc45fcfad28132e8c60"

CONTAINER = "\n".join(
    f"{n}:{name}:/docker/{_DOCKER_ID}"
    for n, name in [
        (14, "name=systemd"),
        (13, "pids"),
        (12, "hugetlb"),
        (11, "net_prio"),
        (10, "perf_event"),
        (9, "net_cls"),
        (8, "freezer"),
        (7, "devices"),
        (6, "memory"),
        (5, "blkio"),
        (4, "cpuacct"),
        (3, "cpu"),
        (2, "cpuset"),
    ]
) + "\n1:name=openrc:/docker\n"

CONTAINER_HOST_PID_NAMESPACE = """14:name=systemd:/
13:pids:/
12:hugetlb:/
11:net_prio:/
10:perf_event:/
9:net_cls:/
8:freezer:/
7:devices:/
6:memory:/
5:blkio:/
4:cpuacct:/
3:cpu:/
2:cpuset:/
1:name=openrc:/
"""

LXC = "\n".join(
    f"{n}:{name}:/lxc/{_DOCKER_ID}"
    for n, name in [
        (9, "hugetlb"),
        (8, "perf_event"),
        (7, "blkio"),
        (6, "freezer"),
        (5, "devices"),
        (4, "memory"),
        (3, "cpuacct"),
        (2, "cpu"),
        (1, "cpuset"),
    ]
)

_SLICE_PATH = (
    "/service.slice/podc1281d63_01ab_11ea_ba0a_3cfdfe55a1c0.slice/"
    "e2b68f8a6e227921b236c686a243e8ff50f561f493d401da7ac3f8cae28f08b1"
)

SYSTEMD = "\n".join(
    f"{n}:{name}:{'/' if name == 'rdma' else _SLICE_PATH}"
    for n, name in [
        (12, "hugetlb"),
        (11, "perf_event"),
        (10, "pids"),
        (9, "cpu,cpuacct"),
        (8, "cpuset"),
        (7, "memory"),
        (6, "freezer"),
        (5, "rdma"),
        (4, "net_cls,net_prio"),
        (3, "devices"),
        (2, "blkio"),
        (1, "name=systemd"),
    ]
)

EMPTY = ""

_KUBE_PATH = (
    "/kubepods/burstable/podb83789a8-5f9d-11ea-bae1-0a0084deb344/"
    "9f99515d52142271cfeebef269bf4b7609b9b69b62008d6a5d316f561ccf061d"
)

KUBERNETES = "\n".join(
    f"{n}:{name}:{_KUBE_PATH}"
    for n, name in [
        (11, "perf_event"),
        (10, "freezer"),
        (9, "hugetlb"),
        (8, "devices"),
        (7, "blkio"),
        (6, "cpuset"),
        (5, "cpu,cpuacct"),
        (4, "pids"),
        (3, "memory"),
        (2, "net_cls,net_prio"),
        (1, "name=systemd"),
    ]
) + "\n"


@pytest.mark.parametrize(
    ("cgroup", "expected"),
    [
        (NON_CONTAINERIZED, False),
        (CONTAINER, True),
        (CONTAINER_HOST_PID_NAMESPACE, False),
        (LXC, True),
        (SYSTEMD, True),
        (EMPTY, False),
        (KUBERNETES, True),
    ],
)
def test_is_containerized_cgroup(cgroup, expected):
    assert is_containerized_cgroup(cgroup) is expected
    assert is_containerized_cgroup(cgroup.encode()) is expected


def test_missing_cgroup_file_is_not_containerized(tmp_path):
    assert is_containerized(tmp_path / "absent") is False


def test_cgroup_file_is_read(tmp_path):
    cgroup = tmp_path / "cgroup"
    cgroup.write_text(CONTAINER)
    assert is_containerized(cgroup) is True
    cgroup.write_text(NON_CONTAINERIZED)
    assert is_containerized(cgroup) is False