"""Demo records served when no transformed data has been generated yet."""

MOCK_DONATIONS = [
    {
        "id": "don-001",
        "donorId": "donor-001",
        "donorName": "John Doe",
        "amount": 500,
        "date": "2024-01-15",
        "campaign": "School Lunch Program",
        "region": "North America",
        "coordinates": {"latitude": 40.7128, "longitude": -74.0060},
    },
    {
        "id": "don-002",
        "donorId": "donor-002",
        "donorName": "Jane Smith",
        "amount": 250,
        "date": "2024-01-14",
        "campaign": "Digital Learning Initiative",
        "region": "Europe",
        "coordinates": {"latitude": 51.5074, "longitude": -0.1278},
    },
]

MOCK_CAMPAIGNS = [
    {
        "id": "camp-001",
        "name": "School Lunch Program",
        "description": "Providing nutritious meals to students in underserved communities.",
        "goal": 50000,
        "raised": 32500,
        "category": "Education",
        "location": {"country": "United States", "region": "North America",
                     "coordinates": [-74.0060, 40.7128]},
        "startDate": "2024-01-01",
        "endDate": "2024-12-31",
        "status": "active",
        "beneficiaries": 1200,
        "impactMetrics": {"peopleHelped": 1200, "projectsCompleted": 4, "resourcesDistributed": 15640},
    },
    {
        "id": "camp-002",
        "name": "Digital Learning Initiative",
        "description": "Bringing tablets and digital resources into classrooms.",
        "goal": 40000,
        "raised": 38000,
        "category": "Education",
        "location": {"country": "United Kingdom", "region": "Europe",
                     "coordinates": [-0.1278, 51.5074]},
        "startDate": "2024-01-01",
        "endDate": "2024-12-31",
        "status": "completed",
        "beneficiaries": 890,
        "impactMetrics": {"peopleHelped": 890, "projectsCompleted": 6, "resourcesDistributed": 4820},
    },
]

MOCK_IMPACT_SUMMARY = {
    "totalDonations": 1247,
    "totalAmount": 185420,
    "totalBeneficiaries": 3892,
    "impactsByType": {
        "meals_served": {"total": 15640, "description": "Meals served to students"},
        "books_distributed": {"total": 4820, "description": "Educational books distributed"},
        "students_supported": {"total": 2150, "description": "Students receiving support"},
        "scholarships_provided": {"total": 89, "description": "Full scholarships awarded"},
    },
    "regionBreakdown": {
        "North America": {"donations": 420, "amount": 78000, "beneficiaries": 1200},
        "Europe": {"donations": 315, "amount": 52000, "beneficiaries": 890},
        "Asia": {"donations": 298, "amount": 35000, "beneficiaries": 980},
        "Africa": {"donations": 214, "amount": 20420, "beneficiaries": 822},
    },
}

MOCK_DONORS = [
    {
        "id": "donor-001",
        "name": "John Doe",
        "email": "john.doe@email.com",
        "totalDonated": 2500,
        "donationCount": 8,
        "preferredCampaigns": ["School Lunch Program", "Digital Learning Initiative"],
        "joinDate": "2023-03-15",
    },
    {
        "id": "donor-002",
        "name": "Jane Smith",
        "email": "jane.smith@email.com",
        "totalDonated": 1800,
        "donationCount": 6,
        "preferredCampaigns": ["Scholarship Fund", "Library Books Drive"],
        "joinDate": "2023-05-22",
    },
    {
        "id": "donor-003",
        "name": "Education Foundation",
        "email": "contact@educfoundation.org",
        "totalDonated": 15000,
        "donationCount": 25,
        "preferredCampaigns": ["School Lunch Program", "Scholarship Fund", "Digital Learning Initiative"],
        "joinDate": "2022-09-10",
    },
    {
        "id": "donor-004",
        "name": "Tech for Good",
        "email": "donate@techforgood.org",
        "totalDonated": 8500,
        "donationCount": 15,
        "preferredCampaigns": ["Digital Learning Initiative", "Library Books Drive"],
        "joinDate": "2023-01-08",
    },
]

MOCK_TESTIMONIALS = [
    {
        "id": "test-001",
        "beneficiaryName": "Maria Rodriguez",
        "role": "Student",
        "campaign": "School Lunch Program",
        "region": "South America",
        "message": "Thanks to the school lunch program, I can focus on my studies without worrying about hunger.",
        "date": "2024-01-20",
        "impactType": "meals_served",
        "rating": 5,
        "verified": True,
    },
    {
        "id": "test-002",
        "beneficiaryName": "Ahmed Hassan",
        "role": "Teacher",
        "campaign": "Digital Learning Initiative",
        "region": "Africa",
        "message": "The tablets and digital resources have transformed our classroom.",
        "date": "2024-01-18",
        "impactType": "books_distributed",
        "rating": 5,
        "verified": True,
    },
    {
        "id": "test-003",
        "beneficiaryName": "Li Wei",
        "role": "Scholarship Recipient",
        "campaign": "Scholarship Fund",
        "region": "Asia",
        "message": "Receiving this scholarship changed my life.",
        "date": "2024-01-15",
        "impactType": "scholarships_provided",
        "rating": 5,
        "verified": False,
    },
]

MOCK_NOTIFICATIONS = [
    {
        "id": "notif-001",
        "donorId": "donor-001",
        "type": "donation_received",
        "title": "Thank you for your donation!",
        "message": "We received your $500 donation to the School Lunch Program.",
        "donationId": "don-001",
        "date": "2024-01-15T10:30:00Z",
        "read": False,
        "priority": "high",
    },
    {
        "id": "notif-002",
        "donorId": "donor-001",
        "type": "impact_update",
        "title": "Your donation is making an impact!",
        "message": "Your contribution helped serve 150 meals to elementary school students.",
        "donationId": "don-001",
        "impactMetricId": "imp-001",
        "date": "2024-01-16T14:20:00Z",
        "read": True,
        "priority": "medium",
    },
]
