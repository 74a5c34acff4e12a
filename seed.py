"""
Sample data loaded into a fresh store: one admin account and a starter
meal catalog.
"""
import logging

from auth import hash_password
from config import ADMIN_PASSWORD, ADMIN_USERNAME
from database import MemoryStore

logger = logging.getLogger(__name__)


SAMPLE_MEALS = [
    {
        "name": "Paneer Tikka Bowl",
        "description": "Grilled paneer cubes with bell peppers, onions, mint chutney over brown rice",
        "image_url": "https://naturallynidhi.com/wp-content/uploads/2020/04/TandooriPaneerBowl_Cover.jpg",
        "point_cost": 150,
        "category": "Lunch",
        "tags": ["Vegetarian", "Gluten-Free", "Popular"],
        "restaurant_name": "Tandoori Express",
        "prep_time": "10-15 min",
        "nutrition_info": {"calories": 410, "protein": 22, "carbs": 35, "fat": 18},
        "allergens": ["Milk"],
    },
    {
        "name": "Rajma Chawal Bowl",
        "description": "Kidney beans cooked in a tomato-based curry served with brown basmati rice",
        "image_url": "https://images.news18.com/webstories/uploads/2024/11/rajma-chawal.png",
        "point_cost": 100,
        "category": "Lunch",
        "tags": ["Popular", "Gluten-Free", "Student Favorite"],
        "restaurant_name": "Spice Junction",
        "prep_time": "10-15 min",
        "nutrition_info": {"calories": 390, "protein": 14, "carbs": 55, "fat": 10},
        "allergens": [],
    },
    {
        "name": "Chole Quinoa Bowl",
        "description": "Spiced chickpeas over quinoa with cucumber, onion and lemon",
        "image_url": "https://vegecravings.com/wp-content/uploads/2024/09/Quinoa-Chickpea-Salad.jpg",
        "point_cost": 150,
        "category": "Breakfast",
        "tags": ["Salad", "High Protein", "Gluten-Free"],
        "restaurant_name": "Curry Bowl Co.",
        "prep_time": "10 min",
        "nutrition_info": {"calories": 430, "protein": 20, "carbs": 44, "fat": 14},
        "allergens": [],
    },
    {
        "name": "Margherita Pizza",
        "description": "Traditional pizza with tomato sauce, fresh mozzarella, and basil",
        "image_url": "https://images.unsplash.com/photo-1565299624946-b28f40a0ae38",
        "point_cost": 180,
        "category": "Dinner",
        "tags": ["Italian", "Pizza"],
        "restaurant_name": "Pizza Corner",
        "prep_time": "20-25 min",
        "nutrition_info": {"calories": 520, "protein": 22, "carbs": 60, "fat": 26},
        "allergens": ["Gluten", "Milk"],
    },
    {
        "name": "Tofu Bhurji Wrap",
        "description": "Scrambled tofu with Indian spices in a whole wheat wrap",
        "image_url": "https://cookingforpeanuts.com/wp-content/uploads/2022/07/Tofu-Scramble-Burritos.jpg",
        "point_cost": 140,
        "category": "Breakfast",
        "tags": ["Vegan", "Healthy"],
        "restaurant_name": "Urban Dabba",
        "prep_time": "10 min",
        "nutrition_info": {"calories": 360, "protein": 18, "carbs": 38, "fat": 14},
        "allergens": ["Gluten"],
    },
    {
        "name": "Palak Paneer Bowl",
        "description": "Spinach curry with paneer cubes served over millet",
        "image_url": "https://ministryofcurry.com/wp-content/uploads/2017/04/Instant-Pot-Palak-Paneer-SQ.jpg",
        "point_cost": 160,
        "category": "Dinner",
        "tags": ["Indian Style", "Bowl"],
        "restaurant_name": "The Green Bowl",
        "prep_time": "15-20 min",
        "nutrition_info": {"calories": 450, "protein": 22, "carbs": 30, "fat": 20},
        "allergens": ["Milk"],
    },
    {
        "name": "Curd Rice Bowl",
        "description": "Creamy yogurt rice tempered with mustard seeds, curry leaves & ginger",
        "image_url": "https://thespicerackatlanta.com/wp-content/uploads/2021/09/curd-rice.jpg",
        "point_cost": 120,
        "category": "Dinner",
        "tags": ["Comfort Food", "Vegetarian", "Cool & Soothing"],
        "restaurant_name": "Southern Spoon",
        "prep_time": "10 min",
        "nutrition_info": {"calories": 340, "protein": 9, "carbs": 38, "fat": 14},
        "allergens": ["Milk"],
    },
    {
        "name": "Vegetable Upma",
        "description": "Semolina porridge with sauteed veggies and mustard seeds",
        "image_url": "https://www.archanaskitchen.com/images/archanaskitchen/Vegetable_Rice_Upma.jpg",
        "point_cost": 100,
        "category": "Breakfast",
        "tags": ["Vegetarian", "Healthy"],
        "restaurant_name": "Morning Stop",
        "prep_time": "5 min",
        "nutrition_info": {"calories": 320, "protein": 8, "carbs": 42, "fat": 10},
        "allergens": ["Gluten"],
    },
]


def seed_sample_data(db: MemoryStore) -> None:
    if db.get_user_by_username(ADMIN_USERNAME) is None:
        db.create_user(
            username=ADMIN_USERNAME,
            password_hash=hash_password(ADMIN_PASSWORD),
            first_name="Admin",
            last_name="User",
            is_admin=True,
            points=1000,
        )
    for meal in SAMPLE_MEALS:
        db.create_meal(meal)
    logger.info("Seeded %d sample meals", len(SAMPLE_MEALS))
