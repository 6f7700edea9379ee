from ..records import InventoryRecord

DEFAULT_CHECKERS = (
    "Nice", "Fah", "Anont", "Air", "Ploy", "Aum", "Film", "Aun", "Ning", "New", "Tong",
)

# (id, category, name, quantity, unit, status, location)
_SEED_ROWS = (
    (1, "หมวดของใช้จิปาถะ", "ทิชชู่", 0, "ม้วน", "หมด", "ชั้นเก็บของ"),
    (2, "หมวดของใช้จิปาถะ", "น้ำยาล้างมิอ", 2, "ถุง/ขวด", "ปกติ", "อ่างล้างจาน"),
    (3, "หมวดของใช้จิปาถะ", "น้ำยาล้างจาน", 1, "ถุง/ขวด", "ใกล้หมด", "อ่างล้างจาน"),
    (4, "หมวดของใช้จิปาถะ", "Dettol", 1, "ถุง/ขวด", "ใกล้หมด", "อ่างล้างจาน"),
    (5, "หมวดของใช้จิปาถะ", "ถุง 7 ", 1, "แพ็ค", "ใกล้หมด", "โต๊ะแลป/ลิ้นชัก"),
    (6, "หมวดของใช้จิปาถะ", "ถุง 8 ", 1, "แพ็ค", "ใกล้หมด", "โต๊ะแลป/ลิ้นชัก"),
    (7, "หมวดของใช้จิปาถะ", "ถุง 9 ", 1, "แพ็ค", "ใกล้หมด", "โต๊ะแลป/ลิ้นชัก"),
    (8, "หมวดของใช้จิปาถะ", "ถุง 10", 1, "แพ็ค", "ใกล้หมด", "โต๊ะแลป/ลิ้นชัก"),
    (9, "หมวดของใช้จิปาถะ", "ถุง 12 ", 1, "แพ็ค", "ใกล้หมด", "โต๊ะแลป/ลิ้นชัก"),
    (10, "หมวดของใช้จิปาถะ", "ถุง 24 ", 1, "แพ็ค", "ใกล้หมด", "โต๊ะแลป/ลิ้นชัก"),
    (11, "หมวดของใช้จิปาถะ", "หนังยาง", 0, "แพ็ค", "หมด", "โต๊ะแลป/ลิ้นชัก"),
    (12, "หมวดของใช้จิปาถะ", "ฟรอยด์", 0, "กล่อง", "หมด", "โต๊ะแลป/ลิ้นชัก"),
    (13, "หมวดของใช้จิปาถะ", "สำลี", 1, "ถุง", "ใกล้หมด", "โต๊ะแลป/ลิ้นชัก"),
    (14, "หมวดของใช้ทั่วไป", "ถุงมือ size S", 6, "กล่อง", "ปกติ", "โต๊ะแลป/ลิ้นชัก"),
    (15, "หมวดของใช้ทั่วไป", "ถุงมือ size M", 6, "กล่อง", "ปกติ", "โต๊ะแลป/ลิ้นชัก"),
    (16, "หมวดของใช้ทั่วไป", "ถุงมือ size L", 2, "กล่อง", "ใกล้หมด", "โต๊ะแลป/ลิ้นชัก"),
    (17, "หมวดของใช้ทั่วไป", "กล่องทิป", 36, "กล่อง", "ปกติ", "ชั้นเก็บของ"),
    (18, "หมวดของใช้ทั่วไป", "Tips 10 ul", 8, "แพ็ค", "ปกติ", "ชั้นเก็บของ"),
    (19, "หมวดของใช้ทั่วไป", "Tips 200 ul", 4, "แพ็ค", "ปกติ", "ชั้นเก็บของ"),
    (20, "หมวดของใช้ทั่วไป", "Tips 1000 ul", 1, "แพ็ค", "ใกล้หมด", "ชั้นเก็บของ"),
    (21, "หมวดของใช้ทั่วไป", "Microcentrifuge (1.5ml)", 13, "แพ็ค", "ปกติ", "ชั้นเก็บของ"),
    (22, "หมวดของใช้ทั่วไป", "ฟิลเตอร์ 0.22 um (เล็ก)", 32, "อัน", "ปกติ", "โต๊ะแลป/ลิ้นชัก"),
    (23, "หมวดของใช้ทั่วไป", "Tube 15 ml", 6, "แพ็ค", "ปกติ", "ชั้นเก็บของ"),
    (24, "หมวดของใช้ทั่วไป", "Tube 50 ml", 17, "แพ็ค", "ปกติ", "ชั้นเก็บของ"),
    (25, "หมวดของใช้ทั่วไป", "ขวด Duran 250 ml ", 0, "ขวด", "หมด", "ชั้นเก็บของ"),
    (26, "หมวดของใช้ทั่วไป", "ขวด Duran 500  ml ", 6, "ขวด", "ปกติ", "ชั้นเก็บของ"),
    (27, "หมวดของใช้ทั่วไป", "ขวด Duran 1000 ml ", 4, "ขวด", "ปกติ", "ชั้นเก็บของ"),
    (28, "หมวดของใช้ทั่วไป", "ขวด Duran 2000 ml", 0, "ขวด", "หมด", "ชั้นเก็บของ"),
    (29, "หมวดของใช้ทั่วไป", "ไซริ้งค์ 10 ml ", 4, "อัน", "ใกล้หมด", "ชั้นเก็บของ"),
    (30, "หมวดของใช้ทั่วไป", "ไซริ้งค์ 50 ml ", 16, "อัน", "ปกติ", "ชั้นเก็บของ"),
    (31, "หมวดของใช้ทั่วไป", "กล่องตัวอย่าง", 39, "กล่อง", "ปกติ", "ชั้นเก็บของ"),
    (32, "หมวดเลี้ยงเซลล์", "อาหารสูตร MEM", 0, "แพ็ค", "หมด", "ตู้เย็น"),
    (33, "หมวดเลี้ยงเซลล์", "อาหารสูตร DMEM", 16, "ซอง", "ปกติ", "ตู้เย็น"),
    (34, "หมวดเลี้ยงเซลล์", "อาหารสูตร RPMI", 11, "ซอง", "ปกติ", "ตู้เย็น"),
    (35, "หมวดเลี้ยงเซลล์", "FBS stock", 1, "ขวด", "ใกล้หมด", "ตู้เย็น"),
    (36, "หมวดเลี้ยงเซลล์", "FBS ขวดแบ่ง", 12, "หลอด", "ปกติ", "ตู้เย็น"),
    (37, "หมวดเลี้ยงเซลล์", "Cryotube", 0, "แพ็ค", "หมด", "ชั้นเก็บของ"),
    (38, "หมวดเลี้ยงเซลล์", "Pipette พลาสติก 10 ml", 1, "กล่อง", "ใกล้หมด", "ชั้นเก็บของ"),
    (39, "หมวดเลี้ยงเซลล์", "ชุดกรอง media ", 30, "ชุด", "ปกติ", "ชั้นเก็บของ"),
    (40, "หมวดเลี้ยงเซลล์", "Dish 35*10 mm", 45, "แพ็ค", "ปกติ", "ชั้นเก็บของ"),
    (41, "หมวดเลี้ยงเซลล์", "Dish 90*20 mm ", 17, "แพ็ค", "ปกติ", "ชั้นเก็บของ"),
    (42, "หมวดเลี้ยงเซลล์", "Flask T25", 17, "แพ็ค", "ปกติ", "ชั้นเก็บของ"),
    (43, "หมวดเลี้ยงเซลล์", "Flask T75", 8, "แพ็ค", "ปกติ", "ชั้นเก็บของ"),
    (44, "หมวดเลี้ยงเซลล์", "Scraper", 73, "แพ็ค", "ปกติ", "ชั้นเก็บของ"),
    (45, "หมวดเลี้ยงเซลล์", "6well plate", 30, "แพ็ค", "ปกติ", "ชั้นเก็บของ"),
    (46, "หมวดเลี้ยงเซลล์", "12well plate", 44, "แพ็ค", "ปกติ", "ชั้นเก็บของ"),
    (47, "หมวดเลี้ยงเซลล์", "96well plate", 50, "แพ็ค", "ปกติ", "ชั้นเก็บของ"),
    (48, "หมวดเลี้ยงเซลล์", "Sheath fluid", 2, "ขวด", "ใกล้หมด", "ชั้นเก็บของ"),
    (49, "หมวดเลี้ยงเซลล์", "Paraflim", 0, "กล่อง", "หมด", "โต๊ะแลป/ลิ้นชัก"),
    (50, "หมวดเลี้ยงเซลล์", "Trypsin stock", 0, "ขวด", "หมด", "ตู้เย็น"),
    (51, "หมวดเลี้ยงเซลล์", "Trypsin-EDTA ", 1, "หลอด", "ใกล้หมด", "ตู้เย็น"),
    (52, "หมวดเลี้ยงเซลล์", "Pan/step", 2, "หลอด", "ใกล้หมด", "ตู้เย็น"),
    (53, "หมวดเลี้ยงเซลล์", "Trypan blue", 1, "หลอด", "หมด", "โต๊ะแลป/ลิ้นชัก"),
    (54, "หมวดเลี้ยงเซลล์", "HCl", 40, "ml", "ปกติ", "โต๊ะแลป/ลิ้นชัก"),
    (55, "หมวดเลี้ยงเซลล์", "DMSO", 2500, "ml", "ปกติ", "โต๊ะแลป/ลิ้นชัก"),
)

SEED = tuple(InventoryRecord(*row) for row in _SEED_ROWS)
