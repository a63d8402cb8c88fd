"""
Department worker directory (static reference data)
"""
from typing import Dict, List, Optional, Tuple

from app.models.issue import Worker


def _worker(worker_id: str, name: str, phone: str, email: str, department: str,
            experience: str, vehicle: Optional[str] = None) -> Worker:
    seed = email.split("@")[0].split(".")[0]
    return Worker(
        id=worker_id,
        name=name,
        phone=phone,
        email=email,
        department=department,
        experience=experience,
        avatar=f"https://api.dicebear.com/7.x/avataaars/svg?seed={seed}",
        vehicle=vehicle
    )


# Department -> workers. Worker ids are unique across departments.
WORKER_DIRECTORY: Dict[str, Tuple[Worker, ...]] = {
    "Public Works Department": (
        _worker("worker-1", "Raj Sharma", "+91-9876543210", "raj.sharma@dept.com",
                "Public Works Department", "5 years", "Truck - MH01AB1234"),
        _worker("worker-2", "Amit Kumar", "+91-9123456789", "amit.kumar@dept.com",
                "Public Works Department", "3 years", "Van - MH01CD5678"),
    ),
    "Water Supply Department": (
        _worker("worker-3", "Vikram Patel", "+91-8765432109", "vikram.patel@dept.com",
                "Water Supply Department", "7 years", "Truck - MH01EF9012"),
    ),
    "Electricity Department": (
        _worker("worker-4", "Priya Sharma", "+91-8234567890", "priya.sharma@dept.com",
                "Electricity Department", "4 years", "Van - MH01GH3456"),
    ),
    "Waste Management Department": (
        _worker("worker-5", "Sanjay Verma", "+91-7654321098", "sanjay.verma@dept.com",
                "Waste Management Department", "6 years", "Truck - MH01IJ7890"),
    ),
    "Sewage & Drainage Department": (
        _worker("worker-6", "Meena Iyer", "+91-7012345678", "meena.iyer@dept.com",
                "Sewage & Drainage Department", "8 years", "Jetting Truck - MH01KL2345"),
    ),
    "Environmental Department": (
        _worker("worker-7", "Arjun Nair", "+91-7123456780", "arjun.nair@dept.com",
                "Environmental Department", "2 years"),
    ),
    "Police & Safety Department": (
        _worker("worker-8", "Kavita Singh", "+91-7234567801", "kavita.singh@dept.com",
                "Police & Safety Department", "9 years", "Patrol Car - MH01MN6789"),
    ),
    "Traffic Police Department": (
        _worker("worker-9", "Rohit Desai", "+91-7345678012", "rohit.desai@dept.com",
                "Traffic Police Department", "5 years", "Motorcycle - MH01OP0123"),
    ),
    "Municipal Administration": (
        _worker("worker-10", "Farah Khan", "+91-7456780123", "farah.khan@dept.com",
                "Municipal Administration", "11 years"),
    ),
}

_WORKERS_BY_ID: Dict[str, Worker] = {
    worker.id: worker
    for workers in WORKER_DIRECTORY.values()
    for worker in workers
}


def get_available_workers(department: str) -> List[Worker]:
    """Workers of one department; unknown departments have none"""
    return list(WORKER_DIRECTORY.get(department, ()))


def find_worker(worker_id: str) -> Optional[Worker]:
    return _WORKERS_BY_ID.get(worker_id)


def list_departments() -> List[str]:
    return list(WORKER_DIRECTORY.keys())
